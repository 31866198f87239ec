try:
    from backend.bingodraw.server import create_app
except ImportError:  # pragma: no cover
    from bingodraw.server import create_app

app = create_app()

from shopdesk.app import app

# uvicorn run:app --reload
__all__ = ["app"]

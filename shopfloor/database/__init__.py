from .connection import engine, get_db, Base, SessionLocal

__all__ = ["engine", "get_db", "Base", "SessionLocal"]

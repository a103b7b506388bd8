from sqlalchemy import JSON, Column, String
from moviehub.db import Base

class UserRow(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, index=True)
    name = Column(String, default="")
    email = Column(String, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    watchlist = Column(JSON, default=list)

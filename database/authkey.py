from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from database.database import Base

class AuthKey(Base):
    __tablename__ = "authkeys"

    id         = Column(Integer, primary_key=True)
    uid        = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    authkey    = Column(String(36), unique=True, nullable=False)   # uuid4
    created_at = Column(DateTime(timezone=True), server_default=func.now())

# database/post.py
from sqlalchemy import Column, Integer, String, Text, ForeignKey
from database.database import Base

class Post(Base):
    __tablename__ = "posts"

    id          = Column(Integer, primary_key=True)
    uid         = Column(Integer, ForeignKey("users.id"), nullable=False)
    title       = Column(String(255))
    description = Column(Text)
    location    = Column(String(255))
    pic         = Column(String(255), nullable=True)             # référence image, optionnelle

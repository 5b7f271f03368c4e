from sqlalchemy import Column, Integer, ForeignKey
from database.database import Base

class PostLike(Base):
    __tablename__ = "likes"

    uid = Column(Integer, ForeignKey("users.id"), primary_key=True)
    pid = Column(Integer, ForeignKey("posts.id"), primary_key=True, index=True)
    # PK (uid, pid) : 1 like / user / post

# app/db/models/user.py
from sqlalchemy import Column, String, DateTime, func
from app.db.base import Base, new_id


class UserModel(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    name = Column(String(255))
    role = Column(String, nullable=False, default="STAFF")  # 'ADMIN', 'STAFF', 'DOCTOR', 'ATTORNEY'
    created_at = Column(DateTime(timezone=True), server_default=func.now())

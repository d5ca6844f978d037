# backend/ratefeed/db/models.py

from sqlalchemy import Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class UpdateDatetime(Base):
    __tablename__ = "update_datetimes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    update_datetime = Column(String, nullable=False)

    def __repr__(self):
        return f"<UpdateDatetime(id={self.id}, update_datetime='{self.update_datetime}')>"


class Currency(Base):
    __tablename__ = "currencies"

    id = Column(Integer, primary_key=True, autoincrement=True)
    update_datetime_id = Column(
        Integer, ForeignKey("update_datetimes.id"), nullable=False, index=True
    )
    num_code = Column(String(3), nullable=False)
    char_code = Column(String(3), nullable=False)
    multiplier = Column(Integer, nullable=False)
    name = Column(String, nullable=False)
    # Unscaled so values keep the precision they were parsed with.
    value = Column(Numeric(asdecimal=True), nullable=False)

    def __repr__(self):
        return f"<Currency(char_code='{self.char_code}', value={self.value})>"

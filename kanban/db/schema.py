"""Database tables / schema

No ondelete rule and no ORM cascade is declared: dependent rows are removed by kanban.services.cascade.
"""

from sqlalchemy import Column, ForeignKey, String, Table, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class DBUser(Base):
    __tablename__ = "users"
    login: Mapped[str] = mapped_column(String(32), primary_key=True)
    name: Mapped[str] = mapped_column(String(32))
    surname: Mapped[str] = mapped_column(String(32))
    email: Mapped[str] = mapped_column(String(64), unique=True)
    password_hash: Mapped[str] = mapped_column(String(255))


class DBBoard(Base):
    __tablename__ = "boards"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    code: Mapped[str] = mapped_column(String(64), unique=True)
    title: Mapped[str] = mapped_column(String(64))
    owner_login: Mapped[str] = mapped_column(ForeignKey("users.login"))


class DBColumn(Base):
    __tablename__ = "columns"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(64))
    board_id: Mapped[int] = mapped_column(ForeignKey("boards.id"))


class DBCard(Base):
    __tablename__ = "cards"
    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(64))
    description: Mapped[str] = mapped_column(Text)
    color: Mapped[str] = mapped_column(String(7))
    column_id: Mapped[int] = mapped_column(ForeignKey("columns.id"))


# --- Link tables (no surrogate key) ---
membership = Table(
    "membership",
    Base.metadata,
    Column("login", ForeignKey("users.login"), primary_key=True),
    Column("board_id", ForeignKey("boards.id"), primary_key=True),
)

assignment = Table(
    "assignment",
    Base.metadata,
    Column("login", ForeignKey("users.login"), primary_key=True),
    Column("card_id", ForeignKey("cards.id"), primary_key=True),
)

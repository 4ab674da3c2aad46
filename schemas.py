"""
Database Schemas

Pydantic models for the bookstore collection and the seed-and-query run.

Each record model maps to one MongoDB collection:
- Book -> "books" collection
"""

from pydantic import BaseModel, ConfigDict, Field


class Book(BaseModel):
    """
    Books collection schema
    Collection name: "books"
    """
    model_config = ConfigDict(frozen=True)

    title: str = Field(..., description="Book title, unique within the seed set")
    author: str = Field(..., description="Author name")
    genre: str = Field(..., description="Genre category")
    published_year: int = Field(..., description="Year of first publication")
    price: float = Field(..., ge=0, description="Price in dollars")
    in_stock: bool = Field(True, description="Whether the book is in stock")
    pages: int = Field(..., gt=0, description="Page count")
    publisher: str = Field(..., description="Original publisher")


class RunConfig(BaseModel):
    """Connection endpoint and namespace for one seed-and-query run."""
    model_config = ConfigDict(frozen=True)

    uri: str = Field("mongodb://localhost:27017", description="MongoDB connection string")
    database_name: str = Field("plp_bookstore", description="Database to seed")
    collection_name: str = Field("books", description="Collection to reset and seed")
    page_size: int = Field(5, gt=0, description="Records per page in the pagination demo")

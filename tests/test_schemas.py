"""Tests for schemas.py: Book validation and RunConfig defaults."""
import pytest
from pydantic import ValidationError

from insert_books import BOOKS
from schemas import Book, RunConfig


def _book(**overrides):
    fields = dict(title="Dune", author="Frank Herbert", genre="Science Fiction",
                  published_year=1965, price=9.99, in_stock=True, pages=412,
                  publisher="Chilton Books")
    fields.update(overrides)
    return Book(**fields)


class TestBook:

    def test_valid_book_dumps_all_fields(self):
        assert set(_book().model_dump()) == {
            "title", "author", "genre", "published_year",
            "price", "in_stock", "pages", "publisher",
        }

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            _book(price=-1)

    def test_zero_pages_rejected(self):
        with pytest.raises(ValidationError):
            _book(pages=0)

    def test_books_are_immutable(self):
        book = _book()
        with pytest.raises(ValidationError):
            book.price = 1.0


class TestSeedData:

    def test_twelve_unique_titles(self):
        assert len(BOOKS) == 12
        assert len({b.title for b in BOOKS}) == 12

    def test_no_identifier_in_seed_records(self):
        assert all("_id" not in b.model_dump() for b in BOOKS)


class TestRunConfig:

    def test_defaults(self):
        config = RunConfig()
        assert config.uri == "mongodb://localhost:27017"
        assert config.database_name == "plp_bookstore"
        assert config.collection_name == "books"
        assert config.page_size == 5

    def test_frozen(self):
        with pytest.raises(ValidationError):
            RunConfig().page_size = 10

"""
Populate MongoDB with sample book data and walk through CRUD operations,
advanced queries, aggregation pipelines and indexing.

Run: python insert_books.py
"""
import logging
from pprint import pformat
from typing import Any, Callable, Dict, List, Optional

from bson import json_util
from pymongo import ASCENDING, DESCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.errors import ConnectionFailure

from database import connect
from schemas import Book, RunConfig

logger = logging.getLogger(__name__)

BOOKS: List[Book] = [
    Book(title="To Kill a Mockingbird", author="Harper Lee", genre="Fiction", published_year=1960, price=12.99, in_stock=True, pages=336, publisher="J. B. Lippincott & Co."),
    Book(title="1984", author="George Orwell", genre="Dystopian", published_year=1949, price=10.99, in_stock=True, pages=328, publisher="Secker & Warburg"),
    Book(title="The Great Gatsby", author="F. Scott Fitzgerald", genre="Fiction", published_year=1925, price=9.99, in_stock=True, pages=180, publisher="Charles Scribner's Sons"),
    Book(title="Brave New World", author="Aldous Huxley", genre="Dystopian", published_year=1932, price=11.50, in_stock=False, pages=311, publisher="Chatto & Windus"),
    Book(title="The Hobbit", author="J.R.R. Tolkien", genre="Fantasy", published_year=1937, price=14.99, in_stock=True, pages=310, publisher="George Allen & Unwin"),
    Book(title="The Catcher in the Rye", author="J.D. Salinger", genre="Fiction", published_year=1951, price=8.99, in_stock=True, pages=224, publisher="Little, Brown and Company"),
    Book(title="Pride and Prejudice", author="Jane Austen", genre="Romance", published_year=1813, price=7.99, in_stock=True, pages=432, publisher="T. Egerton, Whitehall"),
    Book(title="The Lord of the Rings", author="J.R.R. Tolkien", genre="Fantasy", published_year=1954, price=19.99, in_stock=True, pages=1178, publisher="Allen & Unwin"),
    Book(title="Animal Farm", author="George Orwell", genre="Political Satire", published_year=1945, price=8.50, in_stock=False, pages=112, publisher="Secker & Warburg"),
    Book(title="The Alchemist", author="Paulo Coelho", genre="Fiction", published_year=1988, price=10.99, in_stock=True, pages=197, publisher="HarperOne"),
    Book(title="Moby Dick", author="Herman Melville", genre="Adventure", published_year=1851, price=12.50, in_stock=False, pages=635, publisher="Harper & Brothers"),
    Book(title="Wuthering Heights", author="Emily Brontë", genre="Gothic Fiction", published_year=1847, price=9.99, in_stock=True, pages=342, publisher="Thomas Cautley Newby"),
]

Document = Dict[str, Any]


# ---------------------------------------------------------------------------
# Reset and seed
# ---------------------------------------------------------------------------

def reset_collection(collection: Collection) -> bool:
    """Drop the collection when it already holds records. Returns True if dropped."""
    if collection.count_documents({}) > 0:
        collection.drop()
        logger.info("Dropped existing collection %s", collection.name)
        return True
    return False


def seed_collection(collection: Collection, books: List[Book]) -> List[Any]:
    result = collection.insert_many([book.model_dump() for book in books])
    logger.info("Inserted %d books into %s", len(result.inserted_ids), collection.name)
    return result.inserted_ids


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def find_by_genre(collection: Collection, genre: str) -> List[Document]:
    return list(collection.find({"genre": genre}))


def find_by_author(collection: Collection, author: str) -> List[Document]:
    return list(collection.find({"author": author}))


def find_published_after(collection: Collection, year: int) -> List[Document]:
    return list(collection.find({"published_year": {"$gt": year}}))


def find_in_stock_published_after(collection: Collection, year: int) -> List[Document]:
    return list(collection.find({"in_stock": True, "published_year": {"$gt": year}}))


def find_summaries(collection: Collection) -> List[Document]:
    """Title, author and price only, without the server-generated _id."""
    return list(collection.find({}, {"title": 1, "author": 1, "price": 1, "_id": 0}))


def sort_by_price(collection: Collection, descending: bool = False) -> List[Document]:
    direction = DESCENDING if descending else ASCENDING
    return list(collection.find().sort("price", direction))


def get_page(
    collection: Collection,
    page: int,
    page_size: int,
    sort: Optional[List[tuple]] = None,
) -> List[Document]:
    """
    One page of records using skip/limit. Pages are 1-based; without a sort
    the server's natural order is used.
    """
    if page < 1 or page_size < 1:
        raise ValueError("page and page_size must be positive")
    cursor = collection.find()
    if sort:
        cursor = cursor.sort(sort)
    return list(cursor.skip((page - 1) * page_size).limit(page_size))


# ---------------------------------------------------------------------------
# Mutations
# ---------------------------------------------------------------------------

def update_price(collection: Collection, title: str, price: float) -> int:
    result = collection.update_one({"title": title}, {"$set": {"price": price}})
    logger.info("Updated price of %r to %s (%d modified)", title, price, result.modified_count)
    return result.modified_count


def delete_by_title(collection: Collection, title: str) -> int:
    result = collection.delete_one({"title": title})
    logger.info("Deleted %r (%d removed)", title, result.deleted_count)
    return result.deleted_count


# ---------------------------------------------------------------------------
# Aggregation pipelines
# ---------------------------------------------------------------------------

def average_price_by_genre(collection: Collection) -> List[Document]:
    return list(collection.aggregate([
        {"$group": {"_id": "$genre", "avgPrice": {"$avg": "$price"}}},
    ]))


def author_with_most_books(collection: Collection) -> List[Document]:
    # Ties resolve in whatever order $group emits them.
    return list(collection.aggregate([
        {"$group": {"_id": "$author", "count": {"$sum": 1}}},
        {"$sort": {"count": -1}},
        {"$limit": 1},
    ]))


def books_by_decade(collection: Collection) -> List[Document]:
    return list(collection.aggregate([
        {
            "$group": {
                "_id": {"$multiply": [{"$floor": {"$divide": ["$published_year", 10]}}, 10]},
                "count": {"$sum": 1},
            }
        },
        {"$project": {"_id": 0, "decade": "$_id", "count": 1}},
        {"$sort": {"decade": 1}},
    ]))


# ---------------------------------------------------------------------------
# Indexing
# ---------------------------------------------------------------------------

def create_indexes(collection: Collection) -> List[str]:
    names = [
        collection.create_index([("title", ASCENDING)]),
        collection.create_index([("author", ASCENDING), ("published_year", ASCENDING)]),
    ]
    logger.info("Created indexes %s on %s", ", ".join(names), collection.name)
    return names


def explain_title_query(collection: Collection, title: str) -> Document:
    """Execution statistics the server reports for find({title: ...})."""
    plan = collection.database.command(
        "explain",
        {"find": collection.name, "filter": {"title": title}},
        verbosity="executionStats",
    )
    return plan.get("executionStats", {})


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------

def print_section(label: str, result: Any, out: Callable[[str], None] = print) -> None:
    out(f"\n{label}:")
    out(pformat(result, sort_dicts=False))


def run_demo(collection: Collection, config: RunConfig = RunConfig(), out: Callable[[str], None] = print) -> None:
    if reset_collection(collection):
        out("Old collection dropped")

    seed_collection(collection, BOOKS)
    out(f"{len(BOOKS)} books inserted")

    out("\nBasic queries")
    print_section("Books in Fiction genre", find_by_genre(collection, "Fiction"), out)
    print_section("Books by George Orwell", find_by_author(collection, "George Orwell"), out)
    print_section("Books published after 1950", find_published_after(collection, 1950), out)
    print_section("In-stock books published after 2010", find_in_stock_published_after(collection, 2010), out)
    print_section("Projection (title, author, price)", find_summaries(collection), out)
    print_section("Books sorted by price ascending", sort_by_price(collection), out)
    print_section("Books sorted by price descending", sort_by_price(collection, descending=True), out)
    print_section(f"Page 1 ({config.page_size} books)", get_page(collection, 1, config.page_size), out)
    print_section(f"Page 2 (next {config.page_size} books)", get_page(collection, 2, config.page_size), out)

    out("\nMutations")
    update_price(collection, "The Great Gatsby", 15.99)
    out("Updated The Great Gatsby price")
    delete_by_title(collection, "Animal Farm")
    out("Deleted Animal Farm")

    out("\nAggregation")
    print_section("Average price by genre", average_price_by_genre(collection), out)
    print_section("Author with most books", author_with_most_books(collection), out)
    print_section("Books grouped by decade", books_by_decade(collection), out)

    out("\nIndexing")
    create_indexes(collection)
    out("Index created on title")
    out("Compound index created on author + published_year")
    stats = explain_title_query(collection, "The Hobbit")
    out("\nExplain output for title search:")
    out(json_util.dumps(stats, indent=2))


def run(
    config: RunConfig = RunConfig(),
    client_factory: Callable[[str], MongoClient] = MongoClient,
    out: Callable[[str], None] = print,
) -> None:
    """
    Connect, run every demonstration step, and always release the client.
    Errors end the sequence early; they are reported, never re-raised.
    """
    connected = False
    try:
        with connect(config.uri, client_factory) as client:
            connected = True
            out("Connected to MongoDB")
            collection = client[config.database_name][config.collection_name]
            run_demo(collection, config, out)
    except ConnectionFailure as exc:
        if connected:
            logger.exception("Lost connection to %s", config.uri)
        else:
            logger.exception("Could not connect to %s", config.uri)
        out(f"\nError: {exc}")
    except Exception as exc:
        logger.exception("Demo step failed")
        out(f"\nError: {exc}")
    finally:
        out("\nConnection closed")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run()

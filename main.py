import os
import logging
from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError
from typing import Any, Dict, List, Optional

from database import db, get_documents
from insert_books import (
    BOOKS,
    author_with_most_books,
    average_price_by_genre,
    books_by_decade,
    reset_collection,
    seed_collection,
)
from schemas import RunConfig

logger = logging.getLogger(__name__)

COLLECTION_NAME = RunConfig().collection_name

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def read_root():
    return {"message": "Bookstore API is running"}


@app.post("/api/seed")
async def seed_books():
    """
    Reset the books collection and insert the sample dataset.
    Safe to call repeatedly: an existing collection is dropped first.
    """
    if db is None:
        raise HTTPException(status_code=500, detail="Database not available")
    collection = db[COLLECTION_NAME]
    dropped = reset_collection(collection)
    inserted_ids = seed_collection(collection, BOOKS)
    return {"dropped": dropped, "inserted": len(inserted_ids)}


@app.get("/api/books")
async def list_books(
    genre: Optional[str] = None,
    author: Optional[str] = None,
    published_after: Optional[int] = None,
    in_stock: Optional[bool] = None,
    sort: Optional[str] = None,
    page: int = Query(1, ge=1),
    page_size: int = Query(RunConfig().page_size, ge=1, le=100),
):
    """
    Filter books with exact-match and range predicates (combined with AND).
    - sort: "price" ascending or "-price" descending
    - page/page_size: skip/limit pagination, 1-based pages
    """
    if db is None:
        raise HTTPException(status_code=500, detail="Database not available")

    filter_dict: Dict[str, Any] = {}
    if genre is not None:
        filter_dict["genre"] = genre
    if author is not None:
        filter_dict["author"] = author
    if published_after is not None:
        filter_dict["published_year"] = {"$gt": published_after}
    if in_stock is not None:
        filter_dict["in_stock"] = in_stock

    sort_spec: Optional[List[tuple]] = None
    if sort:
        field = sort.lstrip("-")
        if field != "price":
            raise HTTPException(status_code=400, detail="Only sorting by price is supported")
        sort_spec = [(field, -1 if sort.startswith("-") else 1)]

    docs = get_documents(
        COLLECTION_NAME,
        filter_dict,
        sort=sort_spec,
        skip=(page - 1) * page_size,
        limit=page_size,
    )
    return {"books": docs, "count": len(docs)}


@app.get("/api/stats")
async def book_stats():
    if db is None:
        raise HTTPException(status_code=500, detail="Database not available")
    collection = db[COLLECTION_NAME]
    top = author_with_most_books(collection)
    return {
        "average_price_by_genre": average_price_by_genre(collection),
        "author_with_most_books": top[0] if top else None,
        "books_by_decade": books_by_decade(collection),
    }


@app.get("/test")
def check_bookstore():
    """
    Report whether the database is configured and whether the books
    collection has been seeded.
    """
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "database_url": "✅ Set" if os.getenv("DATABASE_URL") else "❌ Not Set",
        "database_name": "✅ Set" if os.getenv("DATABASE_NAME") else "❌ Not Set",
        "collection": COLLECTION_NAME,
        "collection_exists": False,
        "book_count": 0,
        "seeded": False,
    }
    if db is None:
        return response

    try:
        response["collection_exists"] = COLLECTION_NAME in db.list_collection_names()
        if response["collection_exists"]:
            response["book_count"] = db[COLLECTION_NAME].count_documents({})
        response["seeded"] = response["book_count"] > 0
        response["database"] = "✅ Connected & Working"
    except PyMongoError as e:
        logger.warning("Bookstore check failed: %s", e)
        response["database"] = f"⚠️  Configured but Error: {str(e)[:50]}"
    return response


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)

"""Book endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from portfolio_tracker.api.deps import get_ledger_service
from portfolio_tracker.api.schemas.book import BookCreate, BookListResponse, BookResponse
from portfolio_tracker.core.exceptions import NotFoundError, ValidationError
from portfolio_tracker.services import LedgerService

router = APIRouter(prefix="/books", tags=["books"])


@router.post("", response_model=BookResponse, status_code=201)
def create_book(
    data: BookCreate,
    ledger: LedgerService = Depends(get_ledger_service),
):
    """Create a new book."""
    try:
        book = ledger.create_book(data.name)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    return BookResponse.model_validate(book)


@router.get("", response_model=BookListResponse)
def list_books(ledger: LedgerService = Depends(get_ledger_service)):
    """List all books."""
    books = ledger.list_books()
    return BookListResponse(
        books=[BookResponse.model_validate(b) for b in books],
        count=len(books),
    )


@router.get("/{book_id}", response_model=BookResponse)
def get_book(book_id: str, ledger: LedgerService = Depends(get_ledger_service)):
    """Get a single book."""
    try:
        return BookResponse.model_validate(ledger.get_book(book_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)

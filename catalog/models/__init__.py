# Import every table so SQLModel.metadata knows about all of them
from catalog.models.author import Author
from catalog.models.book import Book, BookGenre
from catalog.models.user import User

__all__ = ["Author", "Book", "BookGenre", "User"]

from pydantic import BaseModel, Field
from typing import List, Literal, Optional

Language = Literal['en', 'da']
Source = Literal['local', 'remote']

class VerseQuery(BaseModel):
    ref: str = Field(..., min_length=1, max_length=100)
    lang: Language = 'en'
    source: Source = 'remote'

class BooksQuery(BaseModel):
    lang: Language = 'en'

class VerseText(BaseModel):
    text: str

class VerseRead(VerseText):
    reference: str
    matchedBook: str
    bookNumber: int
    chapter: int
    verse: int
    endVerse: Optional[int] = None
    defaulted: bool = False
    fuzzy: bool = False
    language: Language
    source: Source

class BookRead(BaseModel):
    ordinal: int
    name: str
    chapters: int

class SearchQuery(BaseModel):
    q: str = Field(..., min_length=1, max_length=200)
    limit: int = Field(10, ge=1, le=50)
    bible: Optional[str] = Field(None, pattern=r'^[A-Za-z0-9-]{1,64}$')

class BibleVerseQuery(BaseModel):
    bible: Optional[str] = Field(None, pattern=r'^[A-Za-z0-9-]{1,64}$')

class ExternalVerse(BaseModel):
    id: str
    reference: str
    text: str

class SearchResults(BaseModel):
    verses: List[ExternalVerse]

class BibleLanguage(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None

class BibleRead(BaseModel):
    id: str
    name: Optional[str] = None
    language: BibleLanguage

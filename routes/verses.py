from flask import Blueprint, jsonify, request, current_app
from pydantic import ValidationError
import concurrent.futures
import logging
import re

from models.canon import chapter_count
from schemas.verse_schemas import (
    BibleRead, BibleVerseQuery, BookRead, BooksQuery, ExternalVerse, SearchQuery, SearchResults,
    VerseQuery, VerseRead, VerseText,
)
from utils.books import default_registry
from utils.errors import VerseLookupError

verses_bp = Blueprint('verses', __name__)
logger = logging.getLogger(__name__)

# API.Bible verse ids look like JHN.3.16
BIBLE_API_VERSE_ID_RE = re.compile(r'^[A-Z0-9]{3}\.\d{1,3}\.\d{1,3}$')

def _validation_response(err):
    details = [{
        'field': '.'.join(str(part) for part in error['loc']),
        'message': error['msg'],
    } for error in err.errors()]
    return jsonify({'error': 'Invalid query parameters', 'details': details}), 400

def _run(coro, description):
    """Run a coroutine on the shared event loop within the request budget.

    Returns (result, error_response).
    """
    runner = current_app.extensions['verse_loop']
    budget = current_app.config['REQUEST_BUDGET_SECONDS']
    try:
        return runner.run(coro, timeout=budget), None
    except VerseLookupError as e:
        logger.warning(f"{e.kind} for {description}: {e.message}")
        status = e.status_code if e.status_code >= 400 else 502
        return None, (jsonify(e.to_dict()), status)
    except concurrent.futures.TimeoutError:
        logger.error(f"Request budget exceeded for {description}")
        return None, (jsonify({
            'error': 'Request timed out while fetching verse. Please try again.',
            'kind': 'UpstreamTimeout',
            'timeout': True,
        }), 504)
    except Exception as e:
        logger.error(f"Error handling {description}: {str(e)}", exc_info=True)
        return None, (jsonify({'error': str(e)}), 500)

def _lookup(source=None):
    if not request.args.get('ref'):
        return None, (jsonify({'error': 'Missing ref query parameter', 'kind': 'InvalidRequest'}), 400)
    try:
        query = VerseQuery(**request.args.to_dict())
    except ValidationError as e:
        return None, _validation_response(e)

    effective_source = source or query.source
    logger.info(f"Resolving '{query.ref}' (lang={query.lang}, source={effective_source})")
    resolver = current_app.extensions['verse_resolver']
    return _run(resolver.resolve_verse(query.ref, query.lang, effective_source),
                f"'{query.ref}' ({query.lang})")

@verses_bp.route('/proxy', methods=['GET'])
def proxy_verse():
    """Live lookup through the upstream source; answers {text}."""
    result, error_response = _lookup(source='remote')
    if error_response:
        return error_response
    return jsonify(VerseText(text=result.text).model_dump())

@verses_bp.route('/resolve', methods=['GET'])
def resolve_verse():
    result, error_response = _lookup()
    if error_response:
        return error_response
    return jsonify(VerseRead(**result.to_dict()).model_dump())

@verses_bp.route('/books', methods=['GET'])
def get_books():
    try:
        query = BooksQuery(**request.args.to_dict())
    except ValidationError as e:
        return _validation_response(e)

    return jsonify([
        BookRead(
            ordinal=book.ordinal,
            name=book.name(query.lang),
            chapters=chapter_count(book.ordinal),
        ).model_dump()
        for book in default_registry.books()
    ])

@verses_bp.route('/search', methods=['GET'])
def search_verses():
    """Free-text or reference search through API.Bible."""
    if not request.args.get('q'):
        return jsonify({'error': 'Missing q query parameter', 'kind': 'InvalidRequest'}), 400
    try:
        query = SearchQuery(**request.args.to_dict())
    except ValidationError as e:
        return _validation_response(e)

    client = current_app.extensions['bible_api']
    verses, error_response = _run(client.search(query.q, query.bible, query.limit),
                                  f"search '{query.q}'")
    if error_response:
        return error_response
    return jsonify(SearchResults(verses=[ExternalVerse(**verse) for verse in verses]).model_dump())

@verses_bp.route('/bibles', methods=['GET'])
def list_bibles():
    client = current_app.extensions['bible_api']
    bibles, error_response = _run(client.list_bibles(), "bible list")
    if error_response:
        return error_response
    return jsonify([BibleRead(**bible).model_dump() for bible in bibles])

@verses_bp.route('/bibles/verses/<verse_id>', methods=['GET'])
def get_bible_verse(verse_id):
    if not BIBLE_API_VERSE_ID_RE.match(verse_id):
        return jsonify({'error': f'Invalid verse id: {verse_id}', 'kind': 'InvalidRequest'}), 400
    try:
        query = BibleVerseQuery(**request.args.to_dict())
    except ValidationError as e:
        return _validation_response(e)

    client = current_app.extensions['bible_api']
    verse, error_response = _run(client.get_verse(verse_id, query.bible), f"verse {verse_id}")
    if error_response:
        return error_response
    return jsonify(ExternalVerse(**verse).model_dump())

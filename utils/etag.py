import hashlib
from fastapi import Request, Response

from models.uber import UberDocument


def generate_etag(document: UberDocument) -> str:
    """
    Generate a strong ETag for a rendered UBER document.

    The hash covers the exact JSON the client receives, so any change to
    data, links or actions yields a new tag.
    """
    rendered = document.model_dump_json()
    etag_hash = hashlib.md5(rendered.encode('utf-8')).hexdigest()
    return f'"{etag_hash}"'


def check_etag_match(request: Request, current_etag: str) -> bool:
    """
    True when If-None-Match names the current ETag (or is `*`).
    Weak validators (W/"...") compare equal to their strong form.
    """
    if_none_match = request.headers.get('if-none-match')
    if not if_none_match:
        return False

    client_etags = [etag.strip().removeprefix('W/') for etag in if_none_match.split(',')]
    return '*' in client_etags or current_etag in client_etags


def set_etag_headers(response: Response, etag: str) -> None:
    response.headers['ETag'] = etag
    response.headers['Cache-Control'] = 'private, max-age=0, must-revalidate'


def handle_conditional_request(request: Request, document: UberDocument) -> tuple[str, bool]:
    """
    Returns:
        tuple: (etag, should_return_304)
    """
    current_etag = generate_etag(document)
    return current_etag, check_etag_match(request, current_etag)

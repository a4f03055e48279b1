"""Dictionary lookup: scrapes an English-Chinese entry for one word."""

import logging
import re
from http import HTTPStatus
from urllib.parse import quote

import requests
from bs4 import BeautifulSoup
from flask import current_app

logger = logging.getLogger(__name__)

MAX_EXAMPLES = 2


class DictionaryError(Exception):
    http_status = HTTPStatus.INTERNAL_SERVER_ERROR


class EmptyQuery(DictionaryError, ValueError):
    http_status = HTTPStatus.BAD_REQUEST

    def __init__(self):
        super().__init__("Please enter a word")


class WordNotFound(DictionaryError):
    http_status = HTTPStatus.NOT_FOUND

    def __init__(self, word):
        self.word = word
        super().__init__(f"'{word}' was not found, please check the spelling")


class DictionaryParseError(DictionaryError):
    http_status = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, word):
        self.word = word
        super().__init__(f"Could not find a definition for '{word}'")


class DictionaryUnavailable(DictionaryError):
    http_status = HTTPStatus.BAD_GATEWAY

    def __init__(self):
        super().__init__("Dictionary service is unavailable, please try again later")


def format_word(word: str) -> str:
    # the dictionary uses lower-case, dash-separated slugs ("look up" -> "look-up")
    return re.sub(r'\s+', '-', word.strip().lower())


def build_url(word: str) -> str:
    base_url = current_app.config['DICTIONARY_BASE_URL']
    return base_url + quote(format_word(word))


def parse_entry(word: str, html: str) -> dict:
    """
    Pull the first definition and up to two bilingual examples out of an entry page.

    Raises:
        WordNotFound: page has neither a title nor a definition block
        DictionaryParseError: page has a title but no definition block
    """
    soup = BeautifulSoup(html, 'html.parser')

    def_blocks = soup.select('.def-block')
    if not soup.select('.di-title') and not def_blocks:
        raise WordNotFound(word)
    if not def_blocks:
        raise DictionaryParseError(word)

    first_block = def_blocks[0]
    definition = first_block.select_one('.trans')

    examples = []
    for examp in first_block.select('.examp'):
        if len(examples) >= MAX_EXAMPLES:
            break
        en = examp.select_one('.eg')
        cn = examp.select_one('.trans')
        en_text = en.get_text().strip() if en else ''
        cn_text = cn.get_text().strip() if cn else ''
        # only keep examples that come with a translation
        if en_text and cn_text:
            examples.append({'en': en_text, 'cn': cn_text})

    return {
        'word': word,
        'definition': definition.get_text().strip() if definition else '',
        'examples': examples,
    }


def lookup_word(word: str) -> dict:
    if word is None or not word.strip():
        raise EmptyQuery()
    word = word.strip()

    url = build_url(word)
    try:
        response = requests.get(
            url,
            headers={'User-Agent': current_app.config['DICTIONARY_USER_AGENT']},
            timeout=current_app.config['DICTIONARY_TIMEOUT'],
        )
        if response.status_code == HTTPStatus.NOT_FOUND:
            raise WordNotFound(word)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"Dictionary request for '{word}' failed: {e}")
        raise DictionaryUnavailable() from e

    return parse_entry(word, response.text)

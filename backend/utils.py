# helpers shared by the resources: password hashing and list pagination
from passlib.hash import pbkdf2_sha256


def hash_password(plain_text_password: str):
    # Password complexity is checked by the resource before hashing
    return pbkdf2_sha256.hash(plain_text_password)

def check_password(plain_text_password, hashed):
    # validates a plain-text password against the stored, hashed password
    return pbkdf2_sha256.verify(plain_text_password, hashed)


def paginate_query(query, page=1, per_page=20, max_per_page=100):
    """
    Slice a word-list query into one page.

    page and per_page are clamped into range, so an oversized page number
    lands on the last page. Returns (items, pagination) where pagination is
    the metadata block the /words envelope carries.
    """
    per_page = min(max(per_page, 1), max_per_page)
    total = query.count()
    total_pages = max(-(-total // per_page), 1)
    page = min(max(page, 1), total_pages)

    has_next = page < total_pages
    has_prev = page > 1
    items = query.offset((page - 1) * per_page).limit(per_page).all()
    return items, {
        "page": page,
        "per_page": per_page,
        "total": total,
        "total_pages": total_pages,
        "has_next": has_next,
        "has_prev": has_prev,
        "next_page": page + 1 if has_next else None,
        "prev_page": page - 1 if has_prev else None,
    }

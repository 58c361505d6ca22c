"""Browser automation modules (Playwright).

``session`` owns the shared persistent context and page, ``actions``
maps action requests onto Playwright calls, and ``navigation`` wraps
``page.goto`` with wait-strategy fallback. Anti-detection launch flags
and init scripts live in ``stealth``.
"""

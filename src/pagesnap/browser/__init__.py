"""Browser automation modules (Playwright).

Executable resolution lives in ``resolver``; the single-use session with
guaranteed teardown in ``session``; the request-level capture flow in
``capture``.
"""

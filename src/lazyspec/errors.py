"""Errors raised while declaring suites."""


class DeclarationError(ValueError):
    """A declaration is malformed (bad binding list, unknown child, ...).

    Binding problems are raised when the declaration is built; children that
    are not test cases or suites are reported when the suite is realized.
    """

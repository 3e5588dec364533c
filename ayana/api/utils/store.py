# ayana/api/utils/store.py
from flask import g

from ayana.extensions import db
from ayana.repositories import SqlAlchemyStore
from ayana.services.discounts import DiscountCodeVerifier


def get_store() -> SqlAlchemyStore:
    if "store" not in g:
        g.store = SqlAlchemyStore(db.session)
    return g.store


def get_verifier() -> DiscountCodeVerifier:
    if "verifier" not in g:
        g.verifier = DiscountCodeVerifier(get_store().discounts)
    return g.verifier

"""Offers module - offer catalogue, publisher CRUD and the expiration sweep."""

from hr_portal.modules.offers.models import Offer, OfferType

__all__ = ["Offer", "OfferType"]

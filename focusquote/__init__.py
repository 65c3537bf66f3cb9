"""FocusQuote : devis pour photographes (calcul, cycle de vie, lien public, document)."""

__version__ = "1.0.0"

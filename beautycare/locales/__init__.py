"""Embedded locale bundles.

en.json and he.json are the fallback copies of the site's
assets/locales/*.json, read through importlib.resources when the
site's own files cannot be loaded. Regenerate them with
``beautycare sync-locales`` rather than editing by hand.
"""

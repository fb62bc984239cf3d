"""
=============================================================================
CONTENT LOADERS
=============================================================================

Asynchronous producers for content that has to be read from disk:

    ┌──────────────────────────┬────────────────────┬──────────────────────┐
    │ Loader                   │ Priority           │ Fallback             │
    ├──────────────────────────┼────────────────────┼──────────────────────┤
    │ OemEulaLoader            │ USER_VISIBLE       │ packaged terms       │
    │ ArcTermsLoader           │ USER_VISIBLE       │ empty                │
    │ ArcPrivacyPolicyLoader   │ USER_VISIBLE       │ empty                │
    │ OSCreditsLoader          │ BEST_EFFORT        │ packaged OS credits  │
    │ CrostiniCreditsLoader    │ BEST_EFFORT        │ placeholder string   │
    └──────────────────────────┴────────────────────┴──────────────────────┘

All of them share ContentLoader's start → dispatch → respond flow.

=============================================================================
"""

from .base import ContentLoader, LoaderEnv, LoaderPhase, LoaderState
from .credits import CrostiniCreditsLoader, OSCreditsLoader
from .terms import ArcPrivacyPolicyLoader, ArcTermsLoader, LocalizedTermsLoader, OemEulaLoader

__all__ = [
    "ContentLoader",
    "LoaderEnv",
    "LoaderPhase",
    "LoaderState",
    "OemEulaLoader",
    "LocalizedTermsLoader",
    "ArcTermsLoader",
    "ArcPrivacyPolicyLoader",
    "OSCreditsLoader",
    "CrostiniCreditsLoader",
]

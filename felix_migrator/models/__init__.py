from .ghost_post import GhostAuthor, GhostPost, GhostTag, truncate_excerpt

__all__ = ["GhostAuthor", "GhostPost", "GhostTag", "truncate_excerpt"]

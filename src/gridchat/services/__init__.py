"""Business logic services for the gridchat application.

Submodules are imported explicitly; ``gridchat.schemas`` depends on
``usernames`` so nothing is re-exported here.
"""

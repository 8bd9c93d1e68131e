"""Strongly typed identifiers for Telegram entities.

Telegram identifies users and chats with 64-bit integers. NewType keeps
the requester, their private chat and the gated group from being mixed up.
"""

from typing import NewType

UserId = NewType("UserId", int)

# Private chat used to message the requester
ChannelId = NewType("ChannelId", int)

# Group or supergroup the join request targets
GroupId = NewType("GroupId", int)

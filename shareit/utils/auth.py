from fastapi import Header

USER_ID_HEADER = "X-Sharer-User-Id"


def get_current_user_id(
    user_id: int = Header(
        ...,
        alias=USER_ID_HEADER,
        description="Identifier of the calling user. Trusted as given.",
    ),
) -> int:
    """Return the caller identity taken from the X-Sharer-User-Id header."""
    return user_id

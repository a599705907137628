"""Domain failures raised by the friendship, image and message layers.

Each error carries the HTTP status and a stable machine-readable ``code`` so
the API layer can translate it without string matching. Authorization and
not-found conditions on messages share ``NotFoundOrUnauthorized`` so callers
cannot probe for other users' records.
"""


class GlimpseError(Exception):
    status_code = 400
    code = "error"
    default_detail = "Request could not be completed"

    def __init__(self, detail: str | None = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class NotFound(GlimpseError):
    status_code = 404
    code = "not_found"
    default_detail = "Not found"


class NotFoundOrUnauthorized(GlimpseError):
    status_code = 404
    code = "not_found"
    default_detail = "Message not found or not authorized"


class AlreadyFriends(GlimpseError):
    status_code = 409
    code = "already_friends"
    default_detail = "Friend already added"


class SelfFriend(GlimpseError):
    status_code = 422
    code = "self_friend"
    default_detail = "Cannot add yourself as a friend"


class InvalidRecipient(GlimpseError):
    status_code = 422
    code = "invalid_recipient"
    default_detail = "Recipient does not exist or is the sender"


class ImageNotOwned(GlimpseError):
    status_code = 422
    code = "image_not_owned"
    default_detail = "Image not found or not owned by sender"


class NotAnImageMessage(GlimpseError):
    status_code = 422
    code = "not_an_image_message"
    default_detail = "Message is not an image type"


class MessageExpired(GlimpseError):
    status_code = 410
    code = "message_expired"
    default_detail = "Message has expired"


class StorageUnavailable(GlimpseError):
    status_code = 503
    code = "storage_unavailable"
    default_detail = "Image storage is unavailable"


class InvalidContent(GlimpseError):
    status_code = 422
    code = "invalid_content"
    default_detail = "Text messages need non-blank content"

"""
MIME types and HTTP status codes recognized by the client.

Both vocabularies are closed: a response carrying a status code that is not
listed in :class:`HTTPStatus` is treated as unknown and always fails.
"""

from enum import IntEnum, StrEnum


class MIMEType(StrEnum):
    """Common values of the ``Content-Type`` header.

    ``NONE`` is a sentinel meaning "no content type": on a route it disables
    the ``Content-Type`` header, in an expected-types list it accepts a
    response without one.
    """

    PLAIN_TEXT = "text/plain"
    OCTET_STREAM = "application/octet-stream"
    AAC = "audio/aac"
    ABW = "application/abiword"
    AVI = "video/x-msvideo"
    AZW = "application/vnd.amazon.ebook"
    BMP = "image/bmp"
    BZ = "application/x-bzip"
    BZ2 = "application/x-bzip2"
    CSH = "application/x-csh"
    CSS = "text/css"
    CSV = "text/csv"
    DOC = "application/msword"
    DOCX = (
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    )
    EOT = "application/vnd.ms-fontobject"
    EPUB = "application/epub+zip"
    FORM_DATA = "multipart/form-data"
    GIF = "image/gif"
    HTML = "text/html"
    ICON = "image/x-icon"
    ICALENDAR = "text/calendar"
    JAR = "application/java-archive"
    JPG = "image/jpeg"
    JAVASCRIPT = "application/javascript"
    JSON = "application/json"
    MIDI = "audio/midi"
    MPEG = "video/mpeg"
    MPKG = "application/vnd.apple.installer+xml"
    ODP = "application/vnd.oasis.opendocument.presentation"
    ODS = "application/vnd.oasis.opendocument.spreadsheet"
    ODT = "application/vnd.oasis.opendocument.text"
    OGG_AUDIO = "audio/ogg"
    OGG_VIDEO = "video/ogg"
    OGG_MULTIPLEXED = "application/ogg"
    OTF = "font/otf"
    PNG = "image/png"
    PDF = "application/pdf"
    PPT = "application/vnd.ms-powerpoint"
    PPTX = (
        "application/vnd.openxmlformats-officedocument.presentationml.presentation"
    )
    RAR = "application/x-rar-compressed"
    RTF = "application/rtf"
    SH = "application/x-sh"
    SVG = "image/svg+xml"
    SWF = "application/x-shockwave-flash"
    TAR = "application/x-tar"
    TIFF = "image/tiff"
    TYPESCRIPT = "application/typescript"
    TTF = "font/ttf"
    VSD = "application/vnd.visio"
    WAV = "audio/x-wav"
    WEBA = "audio/webm"
    WEBM = "video/webm"
    WEBP = "image/webp"
    WOFF = "font/woff"
    WOFF2 = "font/woff2"
    XHTML = "application/xhtml+xml"
    XLS = "application/vnd.ms-excel"
    XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    XML = "application/xml"
    XUL = "application/vnd.mozilla.xul+xml"
    X_WWW_FORM_URLENCODED = "application/x-www-form-urlencoded"
    ZIP = "application/zip"
    SEVEN_ZIP = "application/x-7z-compressed"
    NONE = "null"


class HTTPStatus(IntEnum):
    """HTTP status codes with a default interpretation."""

    # 2xx
    OK = 200
    CREATED = 201
    ACCEPTED = 202
    NON_AUTHORITATIVE_INFORMATION = 203
    NO_CONTENT = 204
    RESET_CONTENT = 205
    PARTIAL_CONTENT = 206
    MULTI_STATUS = 207
    ALREADY_REPORTED = 208

    # 3xx
    MULTIPLE_CHOICES = 300
    MOVED_PERMANENTLY = 301
    FOUND = 302
    SEE_OTHER = 303
    NOT_MODIFIED = 304
    USE_PROXY = 305
    TEMPORARY_REDIRECT = 307
    PERMANENT_REDIRECT = 308

    # 4xx
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    NOT_ACCEPTABLE = 406
    PROXY_AUTHENTICATION_REQUIRED = 407
    REQUEST_TIMEOUT = 408
    CONFLICT = 409
    LENGTH_REQUIRED = 411
    PRECONDITION_FAILED = 412
    PAYLOAD_TOO_LARGE = 413
    URI_TOO_LONG = 414
    UNSUPPORTED_MEDIA_TYPE = 415
    RANGE_NOT_SATISFIABLE = 416
    EXPECTATION_FAILED = 417
    LOCKED = 423
    UPGRADE_REQUIRED = 426
    TOO_MANY_REQUESTS = 429
    REQUEST_HEADER_FIELDS_TOO_LARGE = 431
    UNAVAILABLE_FOR_LEGAL_REASONS = 451

    # 5xx
    INTERNAL_SERVER_ERROR = 500
    NOT_IMPLEMENTED = 501
    BAD_GATEWAY = 502
    SERVICE_UNAVAILABLE = 503
    GATEWAY_TIMEOUT = 504
    HTTP_VERSION_NOT_SUPPORTED = 505
    VARIANT_ALSO_NEGOTIATES = 506
    INSUFFICIENT_STORAGE = 507
    LOOP_DETECTED = 508
    NOT_EXTENDED = 510
    NETWORK_AUTHENTICATION_REQUIRED = 511


_KNOWN_STATUS_CODES = frozenset(int(s) for s in HTTPStatus)


def is_known_status(code: int) -> bool:
    """Return True if ``code`` is one of the recognized status codes."""
    return code in _KNOWN_STATUS_CODES

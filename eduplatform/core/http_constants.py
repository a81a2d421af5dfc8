"""Constantes HTTP et bornes par défaut pour éviter les valeurs magiques dans le code."""

# Codes de statut HTTP courants
HTTP_OK = 200
HTTP_BAD_REQUEST = 400
HTTP_FORBIDDEN = 403
HTTP_NOT_FOUND = 404
HTTP_UNPROCESSABLE_ENTITY = 422
HTTP_INTERNAL_SERVER_ERROR = 500
HTTP_SERVICE_UNAVAILABLE = 503

HTTP_ERROR_CODES = {
    HTTP_BAD_REQUEST: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    HTTP_FORBIDDEN: "FORBIDDEN",
    HTTP_NOT_FOUND: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    HTTP_UNPROCESSABLE_ENTITY: "VALIDATION_ERROR",
    HTTP_INTERNAL_SERVER_ERROR: "INTERNAL_ERROR",
    HTTP_SERVICE_UNAVAILABLE: "SERVICE_UNAVAILABLE",
}

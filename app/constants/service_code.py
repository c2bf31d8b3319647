HTTP_STATUS_CODES = {
    "OK": 200,
    "CREATED": 201,
    "NO_CONTENT": 204,
    "BAD_REQUEST": 400,
    "UNAUTHORIZED": 401,
    "FORBIDDEN": 403,
    "NOT_FOUND": 404,
    "CONFLICT": 409,
    "VALIDATION_ERROR": 422,
    "TOO_MANY_REQUESTS": 429,
    "INTERNAL_SERVER_ERROR": 500,
    "SERVICE_UNAVAILABLE": 503,
}

AUTHENTICATION_MESSAGES = {
    "AUTHENTICATION_REQUIRED": "Authentication Required",
    "TOKEN_EXPIRED": "Token expired",
    "INVALID_TOKEN": "Invalid token",
    "ADMIN_REQUIRED": "Admin access required",
}

# Roles carried in the upstream-issued token
ADMIN_ROLES = ("admin", "ADMIN", "superadmin", "SUPER_ADMIN")
CUSTOMER_ROLES = ["customer", "CUSTOMER", "user"]

# Stored account statuses plus the read-time only INACTIVE
ACCOUNT_STATUS = {
    "ACTIVE": "ACTIVE",
    "INACTIVE": "INACTIVE",
    "SUSPENDED": "SUSPENDED",
    "BLOCKED": "BLOCKED",
}

ORDER_STATUS = {
    "PENDING": "pending",
    "CONFIRMED": "confirmed",
    "PROCESSING": "processing",
    "SHIPPED": "shipped",
    "DELIVERED": "delivered",
    "CANCELLED": "cancelled",
}

PAYMENT_STATUS = {
    "PENDING": "pending",
    "COMPLETED": "completed",
    "FAILED": "failed",
}

COD_PAYMENT_METHODS = ("cod", "cash on delivery")

REPORT_TYPES = ["sales", "orders", "payments", "stock", "customers"]

REPORT_MESSAGE_STATUSES = ["Info", "Warning", "Issue", "Summary"]

STOCK_STATUS_LABELS = {
    "out": "Out of Stock",
    "low": "Low Stock",
    "in": "In Stock",
}

# Customer-side per-order reports
ORDER_REPORT_TYPE = "Order Report"

ORDER_REPORT_STATUS = {
    "GENERATED": "Generated",
    "DOWNLOADED": "Downloaded",
}

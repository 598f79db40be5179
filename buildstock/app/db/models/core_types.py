import enum

class Role(str, enum.Enum):
    admin = "admin"
    operator = "operator"

class MovementType(str, enum.Enum):
    incoming = "incoming"
    outgoing = "outgoing"

class StockStatus(str, enum.Enum):
    low = "low"
    normal = "normal"
    high = "high"

from enum import Enum


class PostType(str, Enum):
    RENT = "rent"
    BUY = "buy"


class PropertyTypes(str, Enum):
    APARTMENT = "apartment"
    HOUSE = "house"
    CONDO = "condo"
    LAND = "land"


class TokenType(str, Enum):
    ACCESS = "access"

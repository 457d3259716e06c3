"""Driver type codes to semantic column types."""

from pymysql.constants import FIELD_TYPE

from dbex_mariadb_models import ColumnType

# Every MySQL wire type code the driver can report. Codes missing from the
# table (new server types) resolve to UNKNOWN in column_type().
TYPE_CODES: dict[int, ColumnType] = {
    FIELD_TYPE.DECIMAL: ColumnType.NUMBER,
    FIELD_TYPE.TINY: ColumnType.NUMBER,
    FIELD_TYPE.SHORT: ColumnType.NUMBER,
    FIELD_TYPE.LONG: ColumnType.NUMBER,
    FIELD_TYPE.FLOAT: ColumnType.NUMBER,
    FIELD_TYPE.DOUBLE: ColumnType.NUMBER,
    FIELD_TYPE.NULL: ColumnType.UNKNOWN,
    FIELD_TYPE.TIMESTAMP: ColumnType.DATE,
    FIELD_TYPE.LONGLONG: ColumnType.NUMBER,
    FIELD_TYPE.INT24: ColumnType.NUMBER,
    FIELD_TYPE.DATE: ColumnType.DATE,
    FIELD_TYPE.TIME: ColumnType.DATE,
    FIELD_TYPE.DATETIME: ColumnType.DATE,
    FIELD_TYPE.YEAR: ColumnType.NUMBER,
    FIELD_TYPE.NEWDATE: ColumnType.DATE,
    FIELD_TYPE.VARCHAR: ColumnType.TEXT,
    FIELD_TYPE.BIT: ColumnType.BOOLEAN,
    FIELD_TYPE.JSON: ColumnType.TEXT,
    FIELD_TYPE.NEWDECIMAL: ColumnType.NUMBER,
    FIELD_TYPE.ENUM: ColumnType.TEXT,
    FIELD_TYPE.SET: ColumnType.TEXT,
    # TEXT columns share the BLOB codes; the code alone cannot tell them apart
    FIELD_TYPE.TINY_BLOB: ColumnType.BINARY,
    FIELD_TYPE.MEDIUM_BLOB: ColumnType.BINARY,
    FIELD_TYPE.LONG_BLOB: ColumnType.BINARY,
    FIELD_TYPE.BLOB: ColumnType.BINARY,
    FIELD_TYPE.VAR_STRING: ColumnType.TEXT,
    FIELD_TYPE.STRING: ColumnType.TEXT,
    FIELD_TYPE.GEOMETRY: ColumnType.BINARY,
    # VECTOR (MySQL 9); not defined by every driver release
    242: ColumnType.BINARY,
}


def column_type(type_code: object) -> ColumnType:
    """Map a driver type code to a semantic type, defaulting to UNKNOWN."""
    if isinstance(type_code, bool) or not isinstance(type_code, int):
        return ColumnType.UNKNOWN
    return TYPE_CODES.get(type_code, ColumnType.UNKNOWN)

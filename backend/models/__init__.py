from models.table import TableDescriptor, ColumnDescriptor  # noqa: F401
from models.column_spec import ColumnSpec, CreateTableRequest, MessageResponse, ErrorResponse  # noqa: F401

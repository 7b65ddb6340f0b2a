# recordkeeper - Personal Records and Reminders
# Copyright (c) 2025-2026 Slash Daemon slashdaemon@protonmail.com
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, version 3 of the License.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.
#
# Commercial licensing: [slashdaemon@protonmail.com]

"""
Records Package

Records, categories, the audit trail reader and in-memory search.
"""

from .manager import AuditTrailReader, CategoryManager, RecordManager, RecordValidationError
from .search import SearchError, get_unique_categories, parse_date_bound, search_records

__all__ = [
    "AuditTrailReader",
    "CategoryManager",
    "RecordManager",
    "RecordValidationError",
    "SearchError",
    "get_unique_categories",
    "parse_date_bound",
    "search_records",
]

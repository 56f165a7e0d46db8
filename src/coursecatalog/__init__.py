"""Course Catalog — a small REST API for courses and the users who own them.

Reads are public, writes require HTTP Basic credentials, and a course can
only be changed by the user who created it.
"""

__version__ = "0.1.0"

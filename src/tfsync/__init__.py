"""tfsync - Mirror Terraform Cloud/Enterprise workspace state into S3 objects."""

from .config import Configuration as Configuration
from .context import Context as Context
from .diagnostics import Diagnostic as Diagnostic
from .diagnostics import Diagnostics as Diagnostics
from .diagnostics import Result as Result
from .diagnostics import Severity as Severity
from .digest import sha256_hex as sha256_hex
from .ops import Absent as Absent
from .ops import Ensure as Ensure
from .ops import Present as Present
from .ops import SyncOp as SyncOp
from .provider import Provider as Provider
from .records import SyncRecord as SyncRecord
from .records import build_id as build_id
from .resource import Resource as Resource
from .resource import resource as resource
from .s3_object import S3ObjectResource as S3ObjectResource
from .settings import ProviderConfig as ProviderConfig
from .state import StateSource as StateSource
from .state import TfeStateSource as TfeStateSource
from .store import ObjectStore as ObjectStore
from .store import PutObjectOptions as PutObjectOptions
from .store import S3ObjectStore as S3ObjectStore

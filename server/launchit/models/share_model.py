from enum import Enum
from typing import Optional, List

from . import CamelModel


class ShareType(str, Enum):
    SMB = "smb"
    AFP = "afp"
    NFS = "nfs"
    OTHER = "other"


class DiscoveredShare(CamelModel):
    name: str
    type: ShareType
    host: str
    address: Optional[str] = None  # resolved IP
    open_ports: Optional[List[int]] = None

    @property
    def key(self) -> tuple:
        return (self.type, self.host)

"""
Data models for the prediction market SDK.
"""
from typing import Dict, Any, Optional, List, Tuple
from pydantic import BaseModel, ConfigDict, Field


class FunctionInput(BaseModel):
    """One parameter of a declared function signature"""
    model_config = ConfigDict(frozen=True)

    name: str
    type: str


class NormalizedCall(BaseModel):
    """Ordered, typed arguments plus any transaction options split off the call"""
    model_config = ConfigDict(frozen=True)

    args: Tuple[Any, ...]
    tx_params: Dict[str, Any] = Field(default_factory=dict)


class EventLog(BaseModel):
    """A decoded event emitted by a transaction"""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    event: str
    args: Dict[str, Any]
    address: Optional[str] = None
    log_index: int = Field(0, alias="logIndex")


class TxReceipt(BaseModel):
    """Transaction receipt from the blockchain, with its decoded events"""
    tx_hash: str = Field(..., alias="transactionHash")
    block_number: int = Field(..., alias="blockNumber")
    block_hash: str = Field(..., alias="blockHash")
    status: int
    gas_used: int = Field(..., alias="gasUsed")
    from_address: str = Field(..., alias="from")
    to_address: Optional[str] = Field(None, alias="to")
    events: Tuple[EventLog, ...] = ()

    model_config = ConfigDict(populate_by_name=True)

    def events_named(self, event_name: str) -> List[EventLog]:
        """Return every decoded event with the given name, in log order"""
        return [e for e in self.events if e.event == event_name]


class CallDescriptor(BaseModel):
    """
    A single pending contract call.

    ``event_arg_name`` of ``None`` means only the presence of ``event_name``
    is checked and the whole event is returned.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    contract: Any
    method_name: str
    args: Tuple[Any, ...] = ()
    event_name: Optional[str] = None
    event_arg_name: Optional[str] = None
    tx_params: Dict[str, Any] = Field(default_factory=dict)

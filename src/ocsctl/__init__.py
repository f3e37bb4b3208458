__all__ = [
    # Schema
    "InterfaceSchema",
    "MethodSpec",
    "Mutability",
    "Parameter",
    "TypeSpec",
    "EncodedValue",
    "encode",
    "decode",
    "format_value",
    "parse_type",
    # Keys
    "Keypair",
    "load_keypair",
    "load_wallet",
    "OctraKeypair",
    # Networks
    "NetworkProfile",
    "get_network",
    # Execution
    "QueryExecutor",
    "TransactionBuilder",
    "TransactionDraft",
    "SignedTransaction",
    "FeeParams",
    "ConfirmationTracker",
    "ConfirmationOutcome",
    "ConfirmationStatus",
    "Endpoint",
    "HttpEndpoint",
    # Dispatch
    "Dispatcher",
    "InvocationResult",
    "Receipt",
    # Config
    "ClientConfig",
    # Errors
    "InvokeError",
    "SchemaError",
    "ConfigError",
    "CoercionError",
    "CallError",
    "BuildError",
    "SubmitError",
    "DispatchError",
]

from .config import ClientConfig
from .dispatch import Dispatcher, InvocationResult, Receipt
from .errors import (
    BuildError,
    CallError,
    CoercionError,
    ConfigError,
    DispatchError,
    InvokeError,
    SchemaError,
    SubmitError,
)
from .networks import NetworkProfile, get_network
from .pneuma.query import QueryExecutor
from .pneuma.rpc import Endpoint, HttpEndpoint
from .pneuma.tracker import ConfirmationOutcome, ConfirmationStatus, ConfirmationTracker
from .pneuma.tx import FeeParams, SignedTransaction, TransactionBuilder, TransactionDraft
from .schema.coerce import EncodedValue, decode, encode, format_value
from .schema.models import InterfaceSchema, MethodSpec, Mutability, Parameter
from .schema.types import TypeSpec, parse_type
from .sigil.keys import Keypair, load_keypair, load_wallet
from .sigil.octra import OctraKeypair

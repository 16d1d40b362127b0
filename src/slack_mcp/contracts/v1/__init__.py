from .invocation import InvocationResult
from .tool_args import (
    AddReactionArgs,
    DownloadThreadFilesArgs,
    GetChannelHistoryArgs,
    GetThreadRepliesArgs,
    GetUserProfileArgs,
    GetUsersArgs,
    ListChannelsArgs,
    PostMessageArgs,
    ReplyToThreadArgs,
    UploadFileToThreadArgs,
)
from .transfer import ThreadFileRef, TransferError, TransferOutcome, UploadSession

__all__ = [
    "AddReactionArgs",
    "DownloadThreadFilesArgs",
    "GetChannelHistoryArgs",
    "GetThreadRepliesArgs",
    "GetUserProfileArgs",
    "GetUsersArgs",
    "InvocationResult",
    "ListChannelsArgs",
    "PostMessageArgs",
    "ReplyToThreadArgs",
    "ThreadFileRef",
    "TransferError",
    "TransferOutcome",
    "UploadFileToThreadArgs",
    "UploadSession",
]

from .participant import Participant
from .submission import Submission, CompletionStatus
from .response import Response
from .ranking import RankingResponse
from .draft import DraftEntry

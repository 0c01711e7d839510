from .user import User
from .startup import Startup, Member
from .convocatoria import Convocatoria, Criterion
from .applicant import Applicant
from .answer import Answer
from .evaluation import Evaluation, CriterionScore

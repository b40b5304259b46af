from .engine import evaluate_custody
from .models import MOTHER, FATHER, CustodyResult, ExchangeEvent

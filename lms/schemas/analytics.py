from pydantic import BaseModel
from typing import Dict


class AssessmentAnalytics(BaseModel):
    assessment_id: int
    total_submissions: int
    average_score: float
    highest_score: float
    lowest_score: float
    pass_rate: float
    score_distribution: Dict[str, int]
    average_time_spent: float

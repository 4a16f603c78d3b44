from dataclasses import dataclass


@dataclass
class Category:
    id: int
    user_id: int
    name: str
    type: str           # 'income' | 'expense'
    color: str = "#6366F1"
    created_at: str = ""

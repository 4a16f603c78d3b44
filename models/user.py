from dataclasses import dataclass


@dataclass
class User:
    id: int
    email: str
    created_at: str = ""


@dataclass
class Profile:
    user_id: int
    full_name: str = ""
    theme: str = "system"       # 'light' | 'dark' | 'system'
    currency: str = "BRL"
    updated_at: str = ""

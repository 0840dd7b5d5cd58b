# docgate_server/tools/userdata.py
from pydantic import BaseModel


class NoArgsIn(BaseModel):
    pass

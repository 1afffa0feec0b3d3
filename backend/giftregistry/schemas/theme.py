from giftregistry.schemas.base import CamelModel


class ThemeRead(CamelModel):
    id: int
    name: str
    color: str
    background: str
    button_color: str

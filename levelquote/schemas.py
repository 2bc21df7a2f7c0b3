from pydantic import BaseModel
from typing import Optional, List, Union
from datetime import datetime
from .models import DocumentType, BusinessType, ServiceType, FLAT_UNIT

# Form values may arrive as "1,250"; the calculators parse them
Number = Union[float, str]


class CustomerBase(BaseModel):
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None

class CustomerCreate(CustomerBase):
    pass

class CustomerUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    notes: Optional[str] = None

class Customer(CustomerBase):
    id: int
    created_at: datetime
    class Config:
        from_attributes = True


class ServiceLineBase(BaseModel):
    service_type: ServiceType = ServiceType.CUSTOM
    description: str
    quantity: float = 1.0
    unit: str = FLAT_UNIT
    rate: float = 0.0
    details: Optional[dict] = None

class ServiceLineCreate(ServiceLineBase):
    pass

class ServiceLine(ServiceLineBase):
    id: int
    position: int
    amount: float
    class Config:
        from_attributes = True


class DocumentBase(BaseModel):
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    business_type: Optional[str] = None
    status: Optional[str] = None
    notes: Optional[str] = None
    tax_rate: Optional[float] = None
    issue_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    valid_until: Optional[datetime] = None

class DocumentCreate(DocumentBase):
    service_lines: List[ServiceLineCreate] = []

class DocumentUpdate(DocumentBase):
    service_lines: Optional[List[ServiceLineCreate]] = None

class Document(BaseModel):
    id: int
    doc_type: DocumentType
    number: int
    document_number: str
    status: str
    business_type: Optional[BusinessType] = None
    customer_id: Optional[int] = None
    customer_name: str
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    notes: Optional[str] = None
    issue_date: Optional[datetime] = None
    due_date: Optional[datetime] = None
    valid_until: Optional[datetime] = None
    tax_rate: float
    subtotal: float
    tax: float
    total: float
    converted_from_id: Optional[int] = None
    converted_to_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime
    service_lines: List[ServiceLine] = []
    class Config:
        from_attributes = True

class StatusUpdate(BaseModel):
    status: str


# --- Calculator requests ---

class FoamLevelingRequest(BaseModel):
    length: Optional[Number] = None
    width: Optional[Number] = None
    inches_settled: Optional[Number] = None
    sides_settled: Optional[Number] = None
    soil_type: Optional[str] = None
    weather_conditions: Optional[str] = None
    moisture_level: Optional[str] = None
    travel_distance_miles: Optional[Number] = None
    foam_type: Optional[str] = None
    application_type: Optional[str] = None

class FoamServiceRequest(FoamLevelingRequest):
    price_point: str = "mid"
    custom_price: Optional[Number] = None  # used when price_point is "custom"
    per_area: bool = False
    description: Optional[str] = None

class ConcreteRateRequest(BaseModel):
    project_type: Optional[str] = None
    square_footage: Optional[Number] = None
    severity: Optional[str] = None
    accessibility: Optional[str] = None
    custom_rate: Optional[Number] = None

class MasonryRequest(BaseModel):
    service_type: Optional[str] = None
    quantity: Optional[Number] = None
    rate: Optional[Number] = None
    unit: Optional[str] = None
    description: Optional[str] = None

# app/model_registry/__init__.py


# Register all models here

# User models
from app.users.user_models.user_model import User

# System models
from app.system_models.patient_model.patient_model import Patient
from app.system_models.soap_note_model.soap_note_model import SoapNote
from app.system_models.icd10_model.icd10_model import Icd10Code

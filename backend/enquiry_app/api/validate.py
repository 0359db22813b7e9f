from fastapi import APIRouter, HTTPException

from enquiry_app.models.enquiry import EnquirySubmission
from enquiry_app.services.validation import EnquiryValidator, STEP_VALIDATORS

router = APIRouter()


@router.post("/")
async def validate_enquiry(sub: EnquirySubmission):
    return EnquiryValidator().validate(sub)


@router.post("/{step}")
async def validate_step(step: str, sub: EnquirySubmission):
    if step not in STEP_VALIDATORS:
        raise HTTPException(status_code=404, detail=f"Unknown step: {step}")
    return {"step": step, "valid": EnquiryValidator().validate_step(step, sub)}

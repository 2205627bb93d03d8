import logging
from fastapi import BackgroundTasks, FastAPI, HTTPException
from main import calculate_payroll, calculate_payroll_outcome, run_payroll_file
from models.errors import PayrollError
from models.schema import PayrollData, PayrollOutcome
from utils.helper import DEFAULT_INPUT_FILE, DEFAULT_OUTPUT_FILE, results_to_json
app = FastAPI()

@app.post("/payroll")
def compute_payroll(data: PayrollData):
    try:
        results = calculate_payroll(data.job_meta, data.employee_data)
    except PayrollError as exc:
        raise HTTPException(status_code=422, detail=exc.message)
    return results_to_json(results)

@app.post("/payroll/outcome", response_model=PayrollOutcome)
def compute_payroll_outcome(data: PayrollData):
    return calculate_payroll_outcome(data.job_meta, data.employee_data)

@app.post("/payroll/export")
def export_payroll(background_tasks: BackgroundTasks):
    background_tasks.add_task(run_payroll_job)
    return {"status": "Payroll export received, processing in background."}

def run_payroll_job(input_path: str = DEFAULT_INPUT_FILE, output_path: str = DEFAULT_OUTPUT_FILE) -> None:
    logging.info(f"Running payroll export from {input_path}")
    try:
        run_payroll_file(input_path, output_path)
    except (PayrollError, OSError, ValueError) as exc:
        logging.error(f"Payroll export failed: {exc}")
        return
    logging.info("Payroll export completed.")

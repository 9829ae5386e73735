import logging
import os
import uuid
from contextlib import contextmanager
from io import BytesIO
from zipfile import BadZipFile
from flask import Blueprint, render_template, request, jsonify, current_app, send_file
from openpyxl.utils.exceptions import InvalidFileException
from .auth import login_required
from .models import ProcessingConfig
from .services.punch_parser import parse_punch_workbook, read_table
from .services.shift_processor import process_records, summarize
from .services.daily_aggregator import aggregate_daily
from .services.shift_labeler import parse_bands, label_shifts
from .services.merger import merge_records
from .services.group_filter import list_groups, filter_by_groups
from .services.crossing import cross_reference
from .services import exporter

logger = logging.getLogger(__name__)

main_bp = Blueprint('main', __name__)

XLSX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'


class UploadError(ValueError):
    pass


@main_bp.route('/')
@login_required
def dashboard():
    return render_template('dashboard.html')


@contextmanager
def _saved_uploads(*fields, multiple=False):
    """Save uploaded .xlsx files under UPLOAD_FOLDER and remove them afterwards."""
    uploads = []
    for name in fields:
        files = request.files.getlist(name) if multiple else [request.files.get(name)]
        files = [f for f in files if f is not None and f.filename]
        if not files:
            raise UploadError(f"No file uploaded for '{name}'")
        for file in files:
            if not file.filename.lower().endswith('.xlsx'):
                raise UploadError('File must be .xlsx')
            uploads.append(file)

    paths = []
    try:
        for file in uploads:
            filepath = os.path.join(current_app.config['UPLOAD_FOLDER'], f"{uuid.uuid4().hex}.xlsx")
            file.save(filepath)
            paths.append(filepath)
        yield paths
    finally:
        for filepath in paths:
            if os.path.exists(filepath):
                os.remove(filepath)


def _processing_config() -> ProcessingConfig:
    defaults = ProcessingConfig.from_mapping(current_app.config)
    return ProcessingConfig.from_mapping(request.form, defaults=defaults)


def _wants_xlsx() -> bool:
    return request.args.get('format', request.form.get('format', '')).lower() == 'xlsx'


def _xlsx_response(data: bytes, filename: str):
    return send_file(BytesIO(data), mimetype=XLSX_MIMETYPE, as_attachment=True, download_name=filename)


def _handle(action):
    try:
        return action()
    except ValueError as e:
        logger.warning("Rejected request to %s: %s", request.path, e)
        return jsonify({'error': str(e)}), 400
    except (InvalidFileException, BadZipFile) as e:
        logger.warning("Unreadable workbook sent to %s: %s", request.path, e)
        return jsonify({'error': 'Invalid .xlsx file'}), 400
    except Exception as e:
        logger.exception("Failed to handle %s", request.path)
        return jsonify({'error': str(e)}), 500


@main_bp.route('/api/process', methods=['POST'])
@login_required
def api_process():
    def action():
        config = _processing_config()
        with _saved_uploads('xlsx_file') as (filepath,):
            records = parse_punch_workbook(filepath)
        result = process_records(records, config)
        if _wants_xlsx():
            return _xlsx_response(exporter.export_shifts(result.shifts), 'Tratada.xlsx')
        return jsonify({
            'summary': summarize(result.shifts),
            'dropped': result.dropped,
            'shifts': [s.to_dict() for s in result.shifts],
        })
    return _handle(action)


@main_bp.route('/api/daily', methods=['POST'])
@login_required
def api_daily():
    def action():
        with _saved_uploads('xlsx_file') as (filepath,):
            records = parse_punch_workbook(filepath)
        daily = aggregate_daily(records)
        if _wants_xlsx():
            return _xlsx_response(exporter.export_daily(daily), 'Diaristas.xlsx')
        return jsonify({'total_records': len(daily), 'records': [r.to_dict() for r in daily]})
    return _handle(action)


@main_bp.route('/api/shift-id', methods=['POST'])
@login_required
def api_shift_id():
    def action():
        config = _processing_config()
        bands = parse_bands(request.form.get('bands') or current_app.config['SHIFT_BANDS'])
        with _saved_uploads('xlsx_file') as (filepath,):
            records = parse_punch_workbook(filepath)
        labeled = label_shifts(process_records(records, config).shifts, bands)
        if _wants_xlsx():
            return _xlsx_response(exporter.export_labeled(labeled), 'Turnos.xlsx')
        return jsonify({label: [s.to_dict() for s in shifts] for label, shifts in labeled.items()})
    return _handle(action)


@main_bp.route('/api/merge', methods=['POST'])
@login_required
def api_merge():
    def action():
        with _saved_uploads('files', multiple=True) as paths:
            streams = [parse_punch_workbook(p) for p in paths]
        merged = merge_records(*streams)
        return _xlsx_response(exporter.export_records(merged), 'Unificada.xlsx')
    return _handle(action)


@main_bp.route('/api/filter', methods=['POST'])
@login_required
def api_filter():
    def action():
        with _saved_uploads('xlsx_file') as (filepath,):
            records = parse_punch_workbook(filepath)
        groups = [g for g in request.form.getlist('groups') if g.strip()]
        if not groups:
            return jsonify({'groups': list_groups(records)})
        exclude = request.form.get('exclude', '').lower() in ('1', 'true', 'yes', 'on')
        filtered = filter_by_groups(records, groups, exclude=exclude)
        return _xlsx_response(exporter.export_records(filtered), 'Filtrada.xlsx')
    return _handle(action)


@main_bp.route('/api/cross', methods=['POST'])
@login_required
def api_cross():
    def action():
        left_key = request.form.get('left_key', '').strip()
        right_key = request.form.get('right_key', '').strip() or left_key
        if not left_key:
            raise UploadError('Key column is required')
        columns = [c for c in request.form.getlist('columns') if c.strip()] or None
        with _saved_uploads('left_file', 'right_file') as (left_path, right_path):
            left = read_table(left_path)
            right = read_table(right_path)
        rows, unmatched = cross_reference(left, right, left_key, right_key, columns)
        response = _xlsx_response(exporter.export_table(rows), 'Cruzamento.xlsx')
        response.headers['X-Unmatched-Rows'] = str(unmatched)
        return response
    return _handle(action)

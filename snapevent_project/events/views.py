import logging
import json

from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.shortcuts import redirect, render, get_object_or_404
from django.urls import reverse
from django.http import JsonResponse, HttpResponse
from django.views.decorators.http import require_GET, require_POST
from django.views.decorators.csrf import csrf_exempt

from .filters import ALL_TYPES, event_type_choices, filter_events
from .forms import EventForm
from .gallery import (
    MIN_SWIPE_DISTANCE,
    Lightbox,
    Selection,
    attach_download_urls,
    build_download_archive,
    group_images,
    load_gallery,
    partition_records,
)
from .models import Event, EventRecord
from .uploads import UploadBatch
from .utils import UploadError, generate_qr_code, generate_qr_png, public_url

logger = logging.getLogger(__name__)


def _event_links(request, event):
    return {
        'upload_url': public_url(request, event.get_upload_path()),
        'gallery_url': public_url(request, event.get_gallery_path()),
    }


@login_required
@require_GET
def event_list(request):
    events = list(Event.objects.filter(owner=request.user).order_by('-created_at'))
    search = request.GET.get('q', '')
    event_type = request.GET.get('type', ALL_TYPES)

    rows = []
    for event in filter_events(events, search, event_type):
        links = _event_links(request, event)
        rows.append({'event': event, 'qr_code': generate_qr_code(links['upload_url']), **links})

    return render(request, 'events/event_list.html', {
        'rows': rows,
        'event_count': len(events),
        'event_types': event_type_choices(events),
        'search': search,
        'selected_type': event_type,
    })


@login_required
@require_GET
def new_event(request):
    return render(request, 'events/create_event.html', {'form': EventForm()})


@login_required
@require_POST
def create_event(request):
    form = EventForm(request.POST)
    if not form.is_valid():
        return JsonResponse({'errors': form.errors.get_json_data()}, status=400)

    event = form.save(owner=request.user)
    links = _event_links(request, event)
    logger.info("Event %s created by user %s", event.id, request.user.pk)

    return JsonResponse({
        'success': True,
        'event_id': str(event.id),
        'event_title': event.title,
        'qr_code': generate_qr_code(links['upload_url']),
        **links,
    })


@login_required
@require_GET
def event_qr(request, event_id):
    event = get_object_or_404(Event, id=event_id, owner=request.user)
    png = generate_qr_png(public_url(request, event.get_upload_path()))
    response = HttpResponse(png, content_type="image/png")
    response['Content-Disposition'] = f'attachment; filename="event-qr-{event.id}.png"'
    return response


def upload_page(request, event_id):
    event = get_object_or_404(Event, id=event_id)
    return render(request, 'events/upload.html', {'event': event})


@require_POST
@csrf_exempt
def upload_photos(request, event_id):
    event = get_object_or_404(Event, id=event_id)
    files = request.FILES.getlist('photos')
    batch = UploadBatch(event, message=request.POST.get('message', ''))

    if not files:
        if not batch.message.strip():
            return JsonResponse({'error': 'No photos or message provided'}, status=400)
        return _post_message(batch)

    logger.info("[upload] %d file(s) received for event %s", len(files), event.id)
    batch.submit_files(files)
    batch.upload_all()
    summary = batch.summary

    return JsonResponse({
        'success': summary.failed == 0,
        'files': [task.as_dict() for task in batch.tasks],
        'summary': summary.as_dict(),
    })


@require_POST
@csrf_exempt
def post_message(request, event_id):
    event = get_object_or_404(Event, id=event_id)
    batch = UploadBatch(event, message=request.POST.get('message', ''))
    if not batch.message.strip():
        return JsonResponse({'error': 'Message is empty'}, status=400)
    return _post_message(batch)


def _post_message(batch):
    try:
        record = batch.post_message()
    except UploadError as e:
        return JsonResponse({'error': str(e)}, status=500)
    return JsonResponse({
        'success': True,
        'record_id': str(record.id),
        'summary': {'total': 1, 'successful': 1, 'failed': 0},
    })


def _int_param(request, name):
    try:
        return int(request.GET[name])
    except (KeyError, ValueError):
        return None


def gallery(request, event_id):
    data = load_gallery(event_id)
    images, texts = partition_records(data.records)
    gallery_path = reverse('gallery', args=[event_id])

    lightbox = Lightbox(len(images))
    photo = _int_param(request, 'photo')
    if photo is not None:
        lightbox.open(photo)
        moved = lightbox.navigate(request.GET.get('nav'))
        swipe_from, swipe_to = _int_param(request, 'swipe_from'), _int_param(request, 'swipe_to')
        if swipe_from is not None and swipe_to is not None:
            moved = lightbox.handle_swipe(swipe_from, swipe_to) or moved
        if moved:
            if lightbox.is_fullscreen:
                return redirect(f"{gallery_path}?photo={lightbox.index}")
            return redirect(gallery_path)
    else:
        # Fresh visit to the grid drops any earlier download selection.
        request.session.pop(Selection.session_key(event_id), None)

    attach_download_urls(images)
    positions = {record.id: i for i, record in enumerate(images)}
    groups = [
        {'key': key, 'records': [(positions[r.id], r) for r in records]}
        for key, records in group_images(images).items()
    ]
    selection = Selection.from_session(request.session, event_id)
    context = {
        'event': data.event,
        'groups': groups,
        'text_records': texts,
        'image_count': len(images),
        'lightbox': lightbox,
        'current': images[lightbox.index] if lightbox.is_fullscreen else None,
        'prev_index': lightbox.peek(-1),
        'next_index': lightbox.peek(1),
        'selected_ids': set(selection),
        'min_swipe_distance': MIN_SWIPE_DISTANCE,
    }
    return render(
        request, 'events/gallery.html', context, status=200 if data.event else 404
    )


@require_POST
def toggle_selection(request, event_id, record_id):
    record = get_object_or_404(EventRecord, id=record_id, event_id=event_id)
    selection = Selection.from_session(request.session, event_id)
    selected = selection.toggle(record.id)
    selection.save(request.session, event_id)
    return JsonResponse({'success': True, 'selected': selected, 'count': len(selection)})


@require_POST
def download_selected(request, event_id):
    event = get_object_or_404(Event, id=event_id)

    record_ids = []
    if request.content_type == 'application/json':
        try:
            record_ids = json.loads(request.body).get('record_ids', [])
        except (json.JSONDecodeError, AttributeError):
            return JsonResponse({'error': 'Invalid request body'}, status=400)
        if not isinstance(record_ids, list):
            return JsonResponse({'error': 'record_ids must be a list'}, status=400)

    if not record_ids:
        record_ids = list(Selection.from_session(request.session, event.id))
    if not record_ids:
        return JsonResponse({'error': 'No records selected'}, status=400)

    try:
        records = list(event.records.filter(id__in=record_ids).exclude(url=""))
    except ValidationError:
        logger.warning("Invalid record ids for download: %r", record_ids)
        return JsonResponse({'error': 'Invalid record ids'}, status=400)

    archive, saved, failed = build_download_archive(records)
    logger.info(
        "Download for event %s: %d saved, %d failed", event.id, len(saved), len(failed)
    )

    response = HttpResponse(archive, content_type="application/zip")
    response['Content-Disposition'] = f'attachment; filename="{event.title}_photos.zip"'
    response['X-Failed-Downloads'] = str(len(failed))
    return response

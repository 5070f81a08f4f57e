import logging

from django.conf import settings
from django.contrib import messages
from django.contrib.auth.mixins import LoginRequiredMixin
from django.db import transaction
from django.db.models import Count, Q
from django.http import HttpResponse
from django.shortcuts import get_object_or_404, redirect
from django.urls import reverse_lazy
from django.utils import timezone
from django.views.generic import CreateView, DeleteView, FormView, ListView, UpdateView, View

from .filters import ActivityFilter
from .forms import ActivityBulkActionForm, ActivityForm, ActivityImportForm
from .models import Activity
from .storage import StorageError, dump_activities, load_activities

logger = logging.getLogger('fulcrum.activities')


# ============== Activity List ==============

class ActivityListView(LoginRequiredMixin, ListView):
    """List activities with search, facet filters and sort order."""

    model = Activity
    template_name = 'activities/activity_list.html'
    context_object_name = 'activities'

    def get_paginate_by(self, queryset):
        return getattr(settings, 'ACTIVITIES_PAGE_SIZE', 25)

    def get_queryset(self):
        # Always bound so that defaults (status=all, sort=newest) apply
        self.filterset = ActivityFilter(
            self.request.GET,
            queryset=Activity.objects.select_related('created_by', 'updated_by'),
        )
        return self.filterset.qs

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context['filter'] = self.filterset
        context['active_filters'] = self.filterset.active_filters()
        context['active_filter_count'] = self.filterset.active_filter_count
        context['bulk_form'] = ActivityBulkActionForm()

        counts = Activity.objects.aggregate(
            total=Count('id'),
            drafts=Count('id', filter=Q(status=Activity.Status.DRAFT)),
            published=Count('id', filter=Q(status=Activity.Status.PUBLISHED)),
            archived=Count('id', filter=Q(status=Activity.Status.ARCHIVED)),
        )
        context['counts'] = counts

        # Query string without the page number, reused by pagination links
        params = self.request.GET.copy()
        params.pop('page', None)
        context['query_string'] = params.urlencode()
        return context


# ============== Activity Editor ==============

class ActivityEditorMixin:
    """
    Shared create/edit handling.

    The pressed submit button decides the status: "draft" keeps the
    activity as a draft, anything else publishes it.
    """

    model = Activity
    form_class = ActivityForm
    template_name = 'activities/activity_form.html'
    success_url = reverse_lazy('activities:activity_list')

    def get_requested_status(self):
        if self.request.POST.get('status') == Activity.Status.DRAFT:
            return Activity.Status.DRAFT
        return Activity.Status.PUBLISHED

    def form_invalid(self, form):
        messages.error(self.request, 'Please correct the errors below.')
        return super().form_invalid(form)

    def success_message(self, activity):
        if activity.status == Activity.Status.PUBLISHED:
            return 'Activity published successfully'
        return 'Activity saved as draft successfully'


class ActivityCreateView(LoginRequiredMixin, ActivityEditorMixin, CreateView):
    """Create a new activity."""

    def form_valid(self, form):
        form.instance.status = self.get_requested_status()
        form.instance.created_by = self.request.user
        form.instance.updated_by = self.request.user
        response = super().form_valid(form)
        logger.info(
            "Activity created: %s (id=%s, status=%s) by %s",
            self.object.title, self.object.pk, self.object.status, self.request.user.email
        )
        messages.success(self.request, self.success_message(self.object))
        return response


class ActivityUpdateView(LoginRequiredMixin, ActivityEditorMixin, UpdateView):
    """Edit an existing activity."""

    context_object_name = 'activity'

    def form_valid(self, form):
        form.instance.status = self.get_requested_status()
        form.instance.updated_by = self.request.user
        response = super().form_valid(form)
        logger.info(
            "Activity updated: %s (id=%s, status=%s) by %s",
            self.object.title, self.object.pk, self.object.status, self.request.user.email
        )
        messages.success(self.request, self.success_message(self.object))
        return response


# ============== Lifecycle ==============

class ActivityStatusView(LoginRequiredMixin, View):
    """Archive or restore a single activity from the list."""

    def post(self, request, pk):
        activity = get_object_or_404(Activity, pk=pk)
        status = request.POST.get('status')

        if status not in Activity.Status.values:
            messages.error(request, 'Unknown status.')
            return redirect('activities:activity_list')

        activity.status = status
        activity.updated_by = request.user
        activity.save(update_fields=['status', 'updated_by', 'updated_at'])
        logger.info("Activity %s status set to %s by %s", activity.pk, status, request.user.email)

        if status == Activity.Status.ARCHIVED:
            messages.success(request, 'Activity archived successfully')
        else:
            messages.success(request, 'Activity updated successfully')
        return redirect('activities:activity_list')


class ActivityDeleteView(LoginRequiredMixin, DeleteView):
    """Confirm, then permanently delete an activity."""

    model = Activity
    template_name = 'activities/activity_confirm_delete.html'
    context_object_name = 'activity'
    success_url = reverse_lazy('activities:activity_list')

    def form_valid(self, form):
        activity = self.object
        logger.info("Activity deleted: %s (id=%s) by %s", activity.title, activity.pk, self.request.user.email)
        messages.success(self.request, 'Activity deleted successfully')
        return super().form_valid(form)


class ActivityBulkActionView(LoginRequiredMixin, View):
    """Handle bulk archive / delete on selected activities."""

    def post(self, request):
        form = ActivityBulkActionForm(request.POST)

        if not form.is_valid():
            if 'activities' in form.errors:
                messages.warning(request, 'No activities selected.')
            else:
                messages.error(request, 'Unknown bulk action.')
            return redirect('activities:activity_list')

        action = form.cleaned_data['action']
        selected = Activity.objects.filter(
            pk__in=[activity.pk for activity in form.cleaned_data['activities']]
        )

        with transaction.atomic():
            if action == 'archive':
                count = selected.update(
                    status=Activity.Status.ARCHIVED,
                    updated_by=request.user,
                    updated_at=timezone.now(),
                )
                messages.success(request, f'{count} activities archived successfully')
            else:
                count = selected.count()
                selected.delete()
                messages.success(request, f'{count} activities deleted successfully')

        logger.info("Bulk %s on %d activities by %s", action, count, request.user.email)
        return redirect('activities:activity_list')


# ============== Export / Import ==============

class ActivityExportView(LoginRequiredMixin, View):
    """Download every activity as a JSON array."""

    def get(self, request):
        activities = Activity.objects.order_by('-created_at', '-pk')
        filename = f"{getattr(settings, 'ACTIVITIES_EXPORT_FILENAME', 'fulcrum_activities')}.json"

        response = HttpResponse(dump_activities(activities), content_type='application/json')
        response['Content-Disposition'] = f'attachment; filename="{filename}"'
        logger.info("Activities exported by %s", request.user.email)
        return response


class ActivityImportView(LoginRequiredMixin, FormView):
    """Upload a JSON array and create or update activities from it."""

    form_class = ActivityImportForm
    template_name = 'activities/activity_import.html'
    success_url = reverse_lazy('activities:activity_list')

    def form_valid(self, form):
        upload = form.cleaned_data['import_file']
        try:
            result = load_activities(
                upload.read(),
                skip_existing=form.cleaned_data['skip_existing'],
                user=self.request.user,
            )
        except StorageError as e:
            logger.warning("Activity import rejected for %s: %s", self.request.user.email, e)
            form.add_error('import_file', f'Import failed: {e}')
            return self.form_invalid(form)

        messages.success(self.request, result.summary)
        for error in result.errors:
            messages.warning(self.request, error)
        return super().form_valid(form)

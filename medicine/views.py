import logging

from django.http import HttpResponse
from django.utils import timezone
from rest_framework import filters, generics, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response

from users.permissions import IsPharmacyAdmin
from .models import Manufacturer, Medicine
from .serializers import ManufacturerSerializer, MedicineSerializer, MedicineSummarySerializer
from .utils import CSVParseError, generate_sample_template, import_medicines, parse_medicine_csv
from . import status as expiry

logger = logging.getLogger(__name__)


class ManufacturerListCreateView(generics.ListCreateAPIView):
    queryset = Manufacturer.objects.all()
    serializer_class = ManufacturerSerializer
    filter_backends = [filters.SearchFilter]
    search_fields = ['name']


class MedicineViewSet(viewsets.ModelViewSet):
    """
    API endpoint for medicines
    """
    queryset = Medicine.objects.select_related('manufacturer', 'created_by').all()
    serializer_class = MedicineSerializer
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['name', 'batch', 'manufacturer__name']
    ordering_fields = ['name', 'quantity', 'expiry_date', 'created_at']
    ordering = ['expiry_date', 'name']
    parser_classes = [JSONParser, MultiPartParser, FormParser]

    def get_today(self):
        return timezone.localdate()

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context['today'] = self.get_today()
        return context

    def get_queryset(self):
        queryset = super().get_queryset()

        # Filter by expiry status
        status_param = self.request.query_params.get('status')
        if status_param:
            queryset = self._filter_by_status(queryset, status_param)

        return queryset

    def _filter_by_status(self, queryset, status_param):
        if not expiry.is_valid_status(status_param):
            raise ValidationError({'status': f'Invalid status "{status_param}". Expected one of: {", ".join(expiry.STATUSES)}'})
        return queryset.with_status(status_param, self.get_today())

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user)

    def destroy(self, request, *args, **kwargs):
        medicine = self.get_object()
        logger.info('Deleting medicine %s (%s)', medicine.id, medicine.name)
        medicine.delete()
        return Response({'message': 'Medicine deleted successfully'})

    @action(detail=False, methods=['get'], url_path=r'status/(?P<tier>[^/.]+)')
    def by_status(self, request, tier=None):
        """Get medicines in one expiry tier"""
        queryset = self._filter_by_status(
            self.filter_queryset(super().get_queryset()),
            tier
        )
        serializer = self.get_serializer(queryset, many=True)
        return Response(serializer.data)

    @action(detail=False, methods=['get'])
    def summary(self, request):
        """Get expiry summary statistics"""
        expiry_dates = Medicine.objects.values_list('expiry_date', flat=True)
        summary = expiry.summarize(expiry_dates, self.get_today())
        return Response(MedicineSummarySerializer(summary).data)

    @action(detail=False, methods=['post'], url_path='import', permission_classes=[IsPharmacyAdmin])
    def import_medicines(self, request):
        """
        Import medicines from an uploaded CSV file, or from a JSON list of
        rows under "medicines".
        """
        if 'file' in request.FILES:
            upload = request.FILES['file']
            if not upload.name.lower().endswith('.csv'):
                raise ValidationError({'file': 'Invalid file type. Please upload a CSV file.'})
            try:
                rows = parse_medicine_csv(upload)
            except CSVParseError as e:
                logger.info('Rejected CSV upload %s: row %s, %s', upload.name, e.row, e.message)
                return Response(e.as_dict(), status=status.HTTP_400_BAD_REQUEST)
        else:
            rows = request.data.get('medicines')
            if not isinstance(rows, list):
                raise ValidationError({'medicines': 'Invalid medicines data. Upload a CSV file or send a list of medicines.'})

        results = import_medicines(rows, request.user)

        return Response({
            'message': f'Successfully imported {results["created_count"]} medicines',
            'results': {
                'created': results['created_count'],
                'skipped': results['skipped_count'],
                'errors': results['errors'],
            },
            'medicines': self.get_serializer(results['medicines'], many=True).data,
        }, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'], url_path='import-template')
    def import_template(self, request):
        """Download sample CSV template for medicine import"""
        response = HttpResponse(generate_sample_template(), content_type='text/csv')
        response['Content-Disposition'] = 'attachment; filename="medicine_import_template.csv"'
        return response
